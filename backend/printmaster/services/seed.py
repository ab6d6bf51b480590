from datetime import date
from typing import List

from printmaster.models.catalog import Expense, Product, StockItem

_IMG = "https://images.unsplash.com/photo-{}?auto=format&fit=crop&w=400&q=80"


def seed_products() -> List[Product]:
    return [
        Product(id="pf-bee", name="BEEE Practical File", category="Practical Files",
                description="Basic Electrical & Electronics Engineering standard file. Complete with diagrams.",
                price=150, cost=80, quantity=50, image=_IMG.format("1544816155-12df9643f363")),
        Product(id="pf-chem-45", name="Chemistry Lab Manual", category="Practical Files",
                description="Chemistry practical file with 45 ruled pages and graph papers.",
                price=120, cost=60, quantity=15, image=_IMG.format("1532153975070-2e9ab71f1b14")),
        Product(id="pf-phy", name="Physics Practical Record", category="Practical Files",
                description="Physics lab record book. 100 Pages.",
                price=140, cost=70, quantity=20, image=_IMG.format("1635070041078-e363dbe005cb")),
        Product(id="pf-workshop", name="Workshop Technology File", category="Practical Files",
                description="Standard file for Workshop practice.",
                price=110, cost=55, quantity=0, in_stock=False, image=_IMG.format("1581091226825-a6a2a5aee158")),
        Product(id="svc-print-custom", name="Custom Document Print", category="Custom Print",
                description="Upload PDF, we print and bind. Price per page.",
                price=2, cost=0.5, quantity=9999, image=_IMG.format("1562564055-71e051d33c19")),
        Product(id="bind-spiral", name="Spiral Binding Only", category="Spiral Copies",
                description="Bring your loose pages, we spiral bind them with transparent sheets.",
                price=40, cost=10, quantity=200, image=_IMG.format("1544816155-12df9643f363")),
        Product(id="bind-soft", name="Soft Cover Binding", category="Spiral Copies",
                description="Professional soft cover binding for reports.",
                price=80, cost=30, quantity=50, image=_IMG.format("1589829085413-56de8ae18c73")),
        Product(id="bind-hard", name="Thesis Hard Binding", category="Spiral Copies",
                description="Golden emboss print on hard cover. Best for final year projects.",
                price=250, cost=100, quantity=20, image=_IMG.format("1544816155-12df9643f363")),
        Product(id="st-pen-blue", name="Ball Point Pen (Blue)", category="Stationery",
                description="Smooth writing ball pen.",
                price=10, cost=4, quantity=100, image=_IMG.format("1585336261022-680e295ce3fe")),
        Product(id="st-a4-rim", name="A4 Sheet Rim (500 Sheets)", category="Stationery",
                description="75 GSM High quality paper.",
                price=320, cost=280, quantity=10, image=_IMG.format("1586075010923-2dd4570fb338")),
    ]


def seed_stock() -> List[StockItem]:
    rows = [
        ("s1", "A4 JK Copier 75GSM", "Ream (500)", 8, 10, "Paper"),
        ("s2", "A4 Double A 80GSM", "Ream (500)", 20, 5, "Paper"),
        ("s3", "A3 Bond Paper", "Pack (250)", 2, 3, "Paper"),
        ("s4", "Glossy Photo Paper 180GSM", "Pack (50)", 30, 5, "Paper"),
        ("s6", "HP 12A Black Toner", "Cartridge", 1, 2, "Ink"),
        ("s7", "Canon 337 Toner", "Cartridge", 3, 2, "Ink"),
        ("s8", "Epson 003 Ink Set (CMYK)", "Set", 5, 2, "Ink"),
        ("s9", "Spiral Coils 6mm", "Box (100)", 5, 2, "Binding"),
        ("s10", "Spiral Coils 10mm", "Box (100)", 12, 5, "Binding"),
        ("s11", "Spiral Coils 14mm", "Box (50)", 8, 3, "Binding"),
        ("s13", "OHP Transparent Sheet A4", "Pack (100)", 15, 5, "Cover"),
        ("s16", "Lamination Pouch A4", "Pack (100)", 20, 5, "Lamination"),
        ("s18", "Stapler Pins 24/6", "Box", 50, 10, "Stationery"),
        ("s19", "Glue Stick Box", "Box", 4, 5, "Stationery"),
    ]
    return [
        StockItem(id=i, name=n, unit=u, quantity=q, threshold=t, category=c)
        for i, n, u, q, t, c in rows
    ]


def seed_expenses() -> List[Expense]:
    rows = [
        ("e1", "Shop Rent (May)", 15000, "Rent", date(2024, 5, 1)),
        ("e2", "Electricity Bill (April)", 3200, "Electricity", date(2024, 5, 5)),
        ("e3", "JK Paper Bulk Order", 8500, "Raw Material", date(2024, 5, 10)),
        ("e4", "Printer Service - Canon", 1200, "Repairs", date(2024, 5, 15)),
        ("e5", "Tea & Refreshments", 450, "Other", date(2024, 5, 18)),
        ("e6", "Internet Bill", 999, "Other", date(2024, 5, 20)),
    ]
    return [Expense(id=i, title=t, amount=a, category=c, date=d) for i, t, a, c, d in rows]
