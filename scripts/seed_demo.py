#!/usr/bin/env python3
"""
Seed demo articles and shop floor entries.

Each industry template carries a pool of fields; every generated article
picks a random subset as its shop floor schema. Entries are generated
with values that satisfy that schema and are checked with the same
validator the API uses before they are saved.

Usage:
  python scripts/seed_demo.py [--per-industry 5] [--entries 3]
"""

import argparse
import logging
import random
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from shopfloor.core.field_validation import field_spec_from_row, validate_fields
from shopfloor.core.log_config import configure_logging
from shopfloor.db.session import SessionLocal
from shopfloor.models.article import Article
from shopfloor.models.entry import ENTRY_STATUSES, Entry
from shopfloor.models.entry_value import EntryValue
from shopfloor.models.field_definition import FieldDefinition
from shopfloor.models.field_validation import FieldValidation

logger = logging.getLogger("seed_demo")

# Set seed for reproducibility
random.seed(42)

INDUSTRIES = {
    "medicine-pharma": {
        "organizations": ["PharmaCorp International", "MediTech Solutions", "BioPharm Industries"],
        "prefixes": ["Tablet", "Capsule", "Syrup", "Injection", "Ointment"],
        "suffixes": ["500mg", "250mg", "100ml", "Extended Release", "Pediatric"],
        "fields": [
            ("batch_number", "Batch Number", "text", {"required": True}),
            ("quantity", "Quantity (units)", "number", {"required": True, "min": 1, "max": 10000}),
            ("temperature", "Storage Temperature (°C)", "number", {"required": True, "min": -20, "max": 30}),
            ("quality_check", "Quality Check", "select", {"required": True, "options": ["Pass", "Fail", "Retest"]}),
            ("pH_level", "pH Level", "number", {"min": 0, "max": 14}),
            ("packaging_intact", "Packaging Intact", "boolean", {"required": True}),
        ],
    },
    "metal-automotive": {
        "organizations": ["SteelWorks Manufacturing", "AutoParts Global", "Forge & Fabrication Co"],
        "prefixes": ["Steel", "Aluminum", "Brake", "Bearing", "Shaft"],
        "suffixes": ["Component", "Assembly", "Module", "Kit", "Series X"],
        "fields": [
            ("material_grade", "Material Grade", "text", {"required": True}),
            ("weight", "Weight (kg)", "number", {"required": True, "min": 0.1, "max": 500}),
            ("hardness_test", "Hardness Test (HRC)", "number", {"required": True, "min": 20, "max": 70}),
            ("surface_finish", "Surface Finish", "select",
             {"required": True, "options": ["Polished", "Matte", "Coated", "Anodized"]}),
            ("tensile_strength", "Tensile Strength (MPa)", "number", {"min": 100, "max": 2000}),
        ],
    },
    "plastic-textile": {
        "organizations": ["PolyForm Industries", "TextileWorks Ltd", "FiberTech Corp"],
        "prefixes": ["Sheet", "Film", "Fabric", "Yarn", "Granulate"],
        "suffixes": ["Roll", "Pack", "Grade A", "Recycled", "Industrial"],
        "fields": [
            ("lot_code", "Lot Code", "text", {"required": True}),
            ("thickness", "Thickness (mm)", "number", {"required": True, "min": 0.01, "max": 50}),
            ("color", "Color", "select", {"required": True, "options": ["White", "Black", "Blue", "Natural"]}),
            ("tear_test", "Tear Test Passed", "boolean", {}),
        ],
    },
}


def _sample_value(field_type: str, rules: dict):
    if field_type == "number":
        lo = rules.get("min", 0)
        hi = rules.get("max", lo + 100)
        return round(random.uniform(lo, hi), 2)
    if field_type == "select":
        return random.choice(rules["options"])
    if field_type == "boolean":
        return random.random() > 0.1
    return f"{random.choice('ABCDEFGH')}-{random.randint(1000, 9999)}"


def create_article(db: Session, industry: dict) -> Article:
    now = datetime.utcnow()
    a = Article(
        name=f"{random.choice(industry['prefixes'])} {random.choice(industry['suffixes'])} {random.randint(100, 999)}",
        organization=random.choice(industry["organizations"]),
        status=random.choices(["active", "draft", "archived"], weights=[8, 1, 1])[0],
        created_at=now,
        updated_at=now,
    )
    picked = random.sample(industry["fields"], k=random.randint(2, len(industry["fields"])))
    for position, (key, label, field_type, rules) in enumerate(picked):
        f = FieldDefinition(
            key=key,
            label=label,
            field_type=field_type,
            scope="shop_floor",
            position=position,
            created_at=now,
        )
        if rules:
            f.validation = FieldValidation(
                required=rules.get("required", False),
                min=rules.get("min"),
                max=rules.get("max"),
                options=rules.get("options"),
            )
        a.fields.append(f)
    db.add(a)
    db.flush()
    return a


def create_entry(db: Session, article: Article, rules_by_key: dict) -> Entry | None:
    values = {
        f.key: _sample_value(f.field_type, rules_by_key[f.key])
        for f in article.fields
    }
    errors = validate_fields([field_spec_from_row(f) for f in article.fields], values)
    if errors:
        logger.warning("Skipping generated entry for %s: %s", article.name, errors)
        return None

    now = datetime.utcnow()
    e = Entry(
        article_id=article.id,
        quantity=random.randint(1, 50),
        status=random.choice(ENTRY_STATUSES),
        priority=random.choice(["high", "normal", "normal", "low"]),
        created_at=now,
        updated_at=now,
    )
    if e.status != "PREPARATION":
        e.started_at = now
    if e.status == "READY":
        e.completed_at = now

    for f in article.fields:
        v = values[f.key]
        row = EntryValue(field_definition_id=f.id)
        if f.field_type == "number":
            row.value_number = Decimal(str(v))
        elif f.field_type == "boolean":
            row.value_boolean = v
        else:
            row.value_text = v
        e.values.append(row)

    db.add(e)
    return e


def main():
    parser = argparse.ArgumentParser(description="Seed demo articles and entries")
    parser.add_argument("--per-industry", type=int, default=5)
    parser.add_argument("--entries", type=int, default=3, help="Entries per article")
    args = parser.parse_args()

    configure_logging()
    db = SessionLocal()
    try:
        n_articles = 0
        n_entries = 0
        for industry_key, industry in INDUSTRIES.items():
            rules_by_key = {key: rules for key, _, _, rules in industry["fields"]}
            for _ in range(args.per_industry):
                article = create_article(db, industry)
                n_articles += 1
                for _ in range(args.entries):
                    if create_entry(db, article, rules_by_key):
                        n_entries += 1
            logger.info("Seeded industry %s", industry_key)

        db.commit()

        print("\n=== DEMO SEEDED ===")
        print(f"  articles: {n_articles}")
        print(f"  entries:  {n_entries}")
        print("\nNext actions:")
        print("  1) List articles:        GET /articles")
        print("  2) Submit an entry:      POST /entries")
        print("  3) Production overview:  GET /entries/stats")
        print()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
