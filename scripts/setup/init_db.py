# scripts/setup/init_db.py
"""
Initialize database: creates all tables, optionally loads a demo fleet.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--seed]
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import argparse
from datetime import date, timedelta
from sqlalchemy import inspect, text
from app.database import SessionLocal, create_tables, engine
from app.config import settings
from app.models.enums import CarType, ChauffeurOnboardingStatus, ChauffeurType, DocumentType, UserRole
from app.models.chauffeur import Chauffeur
from app.models.user import User
from app.schemas.vehicle import DocumentIn, VehicleCreate
from app.services.vehicle_service import onboard_vehicle


def seed_demo_fleet():
    """A small fleet: one admin, one fleet manager, two employees, two chauffeurs, three cars."""
    db = SessionLocal()
    try:
        if db.query(User).count():
            print("ℹ️  Users already present — skipping demo seed")
            return

        db.add_all([
            User(id="admin", name="Fleet Admin", email="admin@fleetpro.com", role=UserRole.ADMIN),
            User(id="fm-1", name="Kavya Rao", email="kavya.rao@fleetpro.com", role=UserRole.FLEET_MANAGER),
            User(id="emp-1", name="Arjun Mehta", email="arjun.mehta@fleetpro.com", emp_id="E1001",
                 department="Sales"),
            User(id="emp-2", name="Neha Iyer", email="neha.iyer@fleetpro.com", emp_id="E1002",
                 department="Finance"),
            Chauffeur(id="ch-1", name="Ravi Kumar", license_number="KA01-2018-0042", contact="+91 98450 11223",
                      chauffeur_type=ChauffeurType.M_CAR, onboarding_status=ChauffeurOnboardingStatus.APPROVED),
            Chauffeur(id="ch-2", name="Suresh Gowda", license_number="KA05-2016-1187", contact="+91 99000 44567",
                      chauffeur_type=ChauffeurType.POOL, onboarding_status=ChauffeurOnboardingStatus.APPROVED),
        ])
        db.commit()

        today = date.today()
        fleet = [
            VehicleCreate(license_plate="KA01MJ4521", vin="MA3EWDE1S00123456", make="Toyota", model="Innova Crysta",
                          year=2022, mileage=41250, car_type=CarType.M_CAR,
                          assigned_employee_id="emp-1", assigned_chauffeur_id="ch-1",
                          documents=[DocumentIn(doc_type=DocumentType.INSURANCE, expiry_date=today + timedelta(days=5)),
                                     DocumentIn(doc_type=DocumentType.PUC, expiry_date=today + timedelta(days=40))]),
            VehicleCreate(license_plate="KA03NB7788", vin="MA1TA2HB5M2098765", make="Honda", model="City",
                          year=2021, mileage=58900, car_type=CarType.M_CAR, assigned_employee_id="emp-2",
                          documents=[DocumentIn(doc_type=DocumentType.INSURANCE, expiry_date=today + timedelta(days=200))]),
            VehicleCreate(license_plate="KA05PC1203", vin="MBHCZC63SPE554433", make="Maruti", model="Ciaz",
                          year=2023, mileage=12040, car_type=CarType.POOL, assigned_chauffeur_id="ch-2"),
        ]
        for data in fleet:
            vehicle = onboard_vehicle(db, data)
            print(f"   ✓ {vehicle.license_plate}")
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create FleetPro tables")
    parser.add_argument("--seed", action="store_true", help="Load a small demo fleet")
    args = parser.parse_args()

    print("🗄️  FleetPro DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"✅ Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if args.seed:
        print("\n🚗 Seeding demo fleet...")
        seed_demo_fleet()

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn app.main:app --host {settings.BACKEND_IP} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
