import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./glam_booking.db")

# Managed backend (Postgres + auth) - access tokens are HS256 JWTs signed with this secret
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
SUPABASE_JWT_AUDIENCE = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")

# Stripe Configuration
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
# Separate endpoint secret for the storefront webhook; unsigned events are accepted when unset
STRIPE_PRODUCT_WEBHOOK_SECRET = os.getenv("STRIPE_PRODUCT_WEBHOOK_SECRET")
STRIPE_CURRENCY = os.getenv("STRIPE_CURRENCY", "usd")

# Object storage (S3-compatible endpoint of the managed storage service)
STORAGE_ENDPOINT_URL = os.getenv("STORAGE_ENDPOINT_URL")
STORAGE_ACCESS_KEY_ID = os.getenv("STORAGE_ACCESS_KEY_ID")
STORAGE_SECRET_ACCESS_KEY = os.getenv("STORAGE_SECRET_ACCESS_KEY")
STORAGE_REGION = os.getenv("STORAGE_REGION", "us-east-1")
REVIEW_PHOTOS_BUCKET = os.getenv("REVIEW_PHOTOS_BUCKET", "review-photos")
SIGNED_URL_EXPIRY_SECONDS = 3600

# Frontend base URL for checkout redirects when the request carries no Origin
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Branding used in emails and SMS
BUSINESS_NAME = os.getenv("BUSINESS_NAME", "Paola Beauty Glam")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv(
    "EMAIL_FROM_ADDRESS", "Paola Beauty Glam <notifications@paola-beautyglam.com>"
)
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "paolabeautyglam@gmail.com")

# Twilio SMS - disabled unless all three are set
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER")
