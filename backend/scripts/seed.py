"""Seed script to create the super admin and a demo tenant."""
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import get_settings
from app.database import create_db_engine, create_session_factory, init_db
from app.models.user import UserRole
from app.repositories.tenant import TenantRepository
from app.repositories.user import UserRepository
from app.services.credentials import hash_password

SUPER_ADMIN_EMAIL = "superadmin@system.com"
SUPER_ADMIN_PASSWORD = "Admin@123"

DEMO_SUBDOMAIN = "demo"
DEMO_USERS = [
    ("admin@demo.com", "Demo@123", "Demo Admin", UserRole.TENANT_ADMIN.value),
    ("user1@demo.com", "User@123", "Demo User", UserRole.USER.value),
]


def seed_database():
    """Create the super admin and demo tenant if they do not exist yet."""
    settings = get_settings()
    engine = create_db_engine(settings)
    init_db(engine)
    db = create_session_factory(engine)()
    tenants = TenantRepository(db)
    users = UserRepository(db)

    try:
        admin = users.get_by_email(SUPER_ADMIN_EMAIL, None)
        if not admin:
            print("Creating super admin...")
            admin = users.create(
                tenant_id=None,
                email=SUPER_ADMIN_EMAIL,
                hashed_password=hash_password(SUPER_ADMIN_PASSWORD, settings.bcrypt_rounds),
                full_name="Super Admin",
                role=UserRole.SUPER_ADMIN.value,
            )
            db.commit()
            print(f"Created super admin: {admin.id}")
            print(f"  Email: {SUPER_ADMIN_EMAIL}")
            print(f"  Password: {SUPER_ADMIN_PASSWORD}")
        else:
            print(f"Super admin already exists: {admin.id}")

        tenant = tenants.get_by_subdomain(DEMO_SUBDOMAIN)
        if not tenant:
            print("Creating demo tenant...")
            tenant = tenants.create(name="Demo Company", subdomain=DEMO_SUBDOMAIN, plan="pro")
            db.commit()
            print(f"Created tenant: {tenant.id}")
        else:
            print(f"Tenant already exists: {tenant.id}")

        for email, password, full_name, role in DEMO_USERS:
            if users.get_by_email(email, tenant.id):
                continue
            user = users.create(
                tenant_id=tenant.id,
                email=email,
                hashed_password=hash_password(password, settings.bcrypt_rounds),
                full_name=full_name,
                role=role,
            )
            db.commit()
            print(f"Created {role}: {user.email} / {password}")

        print("\nSeed completed successfully!")

    except Exception as e:
        print(f"Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    seed_database()
