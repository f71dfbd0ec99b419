#!/usr/bin/env python3
"""
Helper script to create .env file from template.
"""

import os

ENV_TEMPLATE = """# Supabase Configuration (leave empty to run on local collections)
SUPABASE_URL=https://YOURPROJECT.supabase.co
SUPABASE_SERVICE_ROLE_KEY=YOUR_SERVICE_KEY
PAPER_BUCKET=papers
SLIP_BUCKET=payments

# Bearer token accepted as the service admin
BACKEND_API_KEY=change-me

# Local uploads when Supabase storage is not configured
STORAGE_ROOT=./data
UPLOADS_DIR=uploads

# Conference
CONFERENCE_CODE=ICHR2026

# Server
HOST=0.0.0.0
PORT=8080
FLASK_ENV=production
GATEWAY_TIMEOUT=10
LOG_LEVEL=INFO
"""

def default_env_path() -> str:
    return os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env")


def write_env(env_path: str) -> None:
    with open(env_path, 'w') as f:
        f.write(ENV_TEMPLATE)


def main():
    env_path = default_env_path()

    if os.path.exists(env_path):
        print(f".env file already exists at {env_path}")
        response = input("Overwrite? (y/N): ")
        if response.lower() != 'y':
            print("Skipping .env creation")
            return

    write_env(env_path)

    print(f"Created .env file at {env_path}")
    print("Please edit .env and update SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY and BACKEND_API_KEY")

if __name__ == "__main__":
    main()
