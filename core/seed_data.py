"""
Initial catalog and worker roster.

Loaded on first start so a fresh deployment has something to book. Re-running
is harmless: catalog entries are replaced by id and workers are matched by
name.
"""

import logging

from core.models import Actor, PricingType, ServiceCreate, WorkerCreate
from core.services.catalog_service import CatalogService
from core.services.worker_service import WorkerService

logger = logging.getLogger(__name__)

SERVICE_AREAS = [
    "DHA Phase 2 Islamabad",
    "Naval Anchorage Islamabad",
    "Bahria Town Phase 1-6",
]

CATALOG = [
    ServiceCreate(
        id="deep",
        name="Deep Cleaning",
        icon_name="House",
        description="Full house detailing (Sofa, Carpet, Mattress shampooing).",
        pricing_type=PricingType.PROJECT,
        category="cleaning",
        display_order=1,
    ),
    ServiceCreate(
        id="regular",
        name="Regular Maintenance",
        icon_name="Wand",
        description="Standard sweeping, mopping, and dusting.",
        pricing_type=PricingType.HOURLY,
        category="cleaning",
        display_order=2,
    ),
    ServiceCreate(
        id="kitchen_bath",
        name="Kitchen & Bathroom Cleaning",
        icon_name="WashingMachine",
        description="Grease removal and heavy-duty sanitization.",
        pricing_type=PricingType.PROJECT,
        category="cleaning",
        display_order=3,
    ),
    ServiceCreate(
        id="ironing",
        name="On-Site Ironing",
        icon_name="Shirt",
        description="Staff comes to your home to press clothes (Hourly / per piece).",
        pricing_type=PricingType.HOURLY,
        category="laundry",
        display_order=4,
    ),
    ServiceCreate(
        id="washing",
        name="On-Site Washing",
        icon_name="WashingMachine",
        description="Staff loads/unloads your machine and hangs clothes.",
        pricing_type=PricingType.HOURLY,
        category="laundry",
        display_order=5,
    ),
    ServiceCreate(
        id="dry_cleaning",
        name="Dry Cleaning (Premium)",
        icon_name="Package",
        description="Pick-up and delivery for suits, blankets, and formal wear.",
        pricing_type=PricingType.PROJECT,
        category="laundry",
        display_order=6,
    ),
]

WORKERS = [
    WorkerCreate(
        name="Aisha K.",
        specialty="Deep Cleaning",
        rating=4.9,
        location="DHA Phase 2, Islamabad",
        age=32,
        languages=["Urdu", "English (Basic)"],
        bio=(
            "Aisha is our top-rated expert for intensive cleaning projects. She has 5 years "
            "of experience specializing in stain removal and chemical-free sanitization."
        ),
        skills=[
            "Carpet Shampooing",
            "Sofa/Upholstery Cleaning",
            "Hard Floor Scrubbing",
            "Post-Construction Cleanup",
        ],
        police_verified=True,
        resident_pass=True,
    ),
    WorkerCreate(
        name="Zahid M.",
        specialty="On-Site Ironing",
        rating=4.7,
        location="Bahria Town Phase 3",
        age=27,
        languages=["Urdu", "Punjabi"],
        bio="Zahid is a highly efficient and reliable expert focused on laundry and garment care.",
        skills=[
            "Professional Ironing",
            "Steam Pressing",
            "Fabric Handling (Silk, Cotton, Linen)",
            "Washing Machine Operation",
        ],
        police_verified=True,
    ),
    WorkerCreate(
        name="Sana R.",
        specialty="Regular Maintenance",
        rating=5.0,
        location="Naval Anchorage, Rawalpindi",
        age=45,
        languages=["Urdu", "Pashto"],
        bio=(
            "With over 10 years in the industry, Sana provides consistent and "
            "high-quality regular maintenance."
        ),
        skills=[
            "Daily Tidying",
            "Mopping & Sweeping",
            "Window Cleaning",
            "Dusting & Sanitization",
        ],
        police_verified=True,
        resident_pass=True,
    ),
]


def seed_database(catalog: CatalogService, worker_service: WorkerService, actor: Actor) -> dict[str, int]:
    """
    Load the initial catalog and any missing workers.

    Args:
        catalog: Catalog to seed
        worker_service: Worker registry to seed
        actor: Administrator the worker registrations are attributed to

    Returns:
        Counts of catalog entries loaded and workers added
    """
    services = catalog.seed(CATALOG)

    existing = {w.name for w in worker_service.list_all()}
    added = 0
    for worker in WORKERS:
        if worker.name in existing:
            continue
        worker_service.create(worker, actor)
        added += 1

    logger.info("Seed complete: %d services, %d new workers", len(services), added)
    return {"services": len(services), "workers": added}
