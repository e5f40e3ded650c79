#!/usr/bin/env python3
"""Supabase database setup script for CityGuide.

This script outputs the SQL needed to create all required tables and RPC
functions in Supabase. Copy the SQL output and run it in the Supabase SQL
Editor.

Usage:
    # Print all SQL to console
    python scripts/setup_supabase.py

    # Print SQL and save to file
    python scripts/setup_supabase.py --output setup.sql

    # Verify tables exist
    python scripts/setup_supabase.py --verify

Tables Created:
    - profiles: One row per auth user, carries the admin flag
    - collections / saved_restaurants / collection_shares: Saved listings
    - businesses / business_subscriptions / subscription_plans: Business management
    - gift_cards: Gift cards sold for businesses
    - amenity_options / user_preferences: Amenities and member preferences
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime

REQUIRED_TABLES = [
    "profiles",
    "collections",
    "saved_restaurants",
    "collection_shares",
    "businesses",
    "business_subscriptions",
    "subscription_plans",
    "gift_cards",
    "amenity_options",
    "user_preferences",
]

# =============================================================================
# SQL Schema Definitions
# =============================================================================

SCHEMA_SQL = """
-- =============================================================================
-- CityGuide Database Schema for Supabase
-- =============================================================================
-- Generated: {generated_at}
--
-- Instructions:
-- 1. Open your Supabase project dashboard
-- 2. Go to SQL Editor
-- 3. Paste this entire script
-- 4. Click "Run" to execute
-- =============================================================================

CREATE EXTENSION IF NOT EXISTS "uuid-ossp";

-- =============================================================================
-- Table: profiles
-- =============================================================================

CREATE TABLE IF NOT EXISTS profiles (
    id UUID PRIMARY KEY REFERENCES auth.users(id) ON DELETE CASCADE,
    email TEXT,
    is_admin BOOLEAN DEFAULT false,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

-- =============================================================================
-- Collections
-- =============================================================================
-- Deleting a collection removes its saved listings and share links.
-- =============================================================================

CREATE TABLE IF NOT EXISTS collections (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    user_id UUID NOT NULL REFERENCES auth.users(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT,
    is_public BOOLEAN DEFAULT false,
    created_at TIMESTAMPTZ DEFAULT NOW(),
    updated_at TIMESTAMPTZ DEFAULT NOW(),

    CONSTRAINT collections_name_not_empty CHECK (name <> '')
);

CREATE INDEX IF NOT EXISTS idx_collections_user_id ON collections(user_id);

CREATE TABLE IF NOT EXISTS saved_restaurants (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    user_id UUID NOT NULL REFERENCES auth.users(id) ON DELETE CASCADE,
    collection_id UUID REFERENCES collections(id) ON DELETE CASCADE,
    restaurant_name TEXT NOT NULL,
    restaurant_address TEXT NOT NULL,
    restaurant_data JSONB NOT NULL DEFAULT '{{}}'::jsonb,
    city TEXT NOT NULL,
    country TEXT NOT NULL,
    category TEXT,
    created_at TIMESTAMPTZ DEFAULT NOW(),
    updated_at TIMESTAMPTZ DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_saved_restaurants_user_id ON saved_restaurants(user_id);
CREATE INDEX IF NOT EXISTS idx_saved_restaurants_collection_id ON saved_restaurants(collection_id);

CREATE TABLE IF NOT EXISTS collection_shares (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    collection_id UUID NOT NULL REFERENCES collections(id) ON DELETE CASCADE,
    share_token TEXT NOT NULL UNIQUE,
    expires_at TIMESTAMPTZ,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

-- =============================================================================
-- Business management
-- =============================================================================

CREATE TABLE IF NOT EXISTS businesses (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    user_id UUID REFERENCES auth.users(id) ON DELETE SET NULL,
    business_name TEXT NOT NULL,
    business_type TEXT NOT NULL,
    description TEXT CHECK (char_length(description) <= 180),
    address TEXT,
    city TEXT,
    state TEXT,
    country TEXT,
    postal_code TEXT,
    email TEXT,
    phone TEXT,
    website TEXT,
    facebook TEXT,
    instagram TEXT,
    twitter TEXT,
    linkedin TEXT,
    status TEXT NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending', 'approved', 'rejected', 'suspended')),
    subscription_tier TEXT
        CHECK (subscription_tier IN ('free', 'basic', 'premium', 'firstclass')),
    subscription_status TEXT,
    subscription_end_date TIMESTAMPTZ,
    gift_cards_enabled BOOLEAN DEFAULT false,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS business_subscriptions (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    business_id UUID NOT NULL REFERENCES businesses(id) ON DELETE CASCADE,
    tier TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'active',
    created_at TIMESTAMPTZ DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS subscription_plans (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    name TEXT NOT NULL,
    tier TEXT NOT NULL,
    description TEXT,
    monthly_price NUMERIC(10, 2) DEFAULT 0,
    annual_price NUMERIC(10, 2) DEFAULT 0,
    annual_discount_percentage NUMERIC(5, 2) DEFAULT 0,
    features JSONB DEFAULT '[]'::jsonb,
    is_active BOOLEAN DEFAULT true,
    sort_order INTEGER DEFAULT 0
);

CREATE TABLE IF NOT EXISTS gift_cards (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    business_id UUID NOT NULL REFERENCES businesses(id) ON DELETE CASCADE,
    amount NUMERIC(10, 2) NOT NULL CHECK (amount >= 5 AND amount <= 1000),
    recipient_name TEXT NOT NULL,
    recipient_email TEXT NOT NULL,
    recipient_phone TEXT,
    message TEXT,
    qr_code TEXT NOT NULL UNIQUE,
    numeric_code TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'active'
        CHECK (status IN ('active', 'redeemed', 'cancelled')),
    purchased_by_name TEXT NOT NULL,
    purchased_by_email TEXT NOT NULL,
    expires_at TIMESTAMPTZ DEFAULT (NOW() + INTERVAL '1 year'),
    created_at TIMESTAMPTZ DEFAULT NOW()
);

-- =============================================================================
-- Amenities and preferences
-- =============================================================================

CREATE TABLE IF NOT EXISTS amenity_options (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    option_key TEXT NOT NULL UNIQUE,
    display_name TEXT NOT NULL,
    description TEXT,
    category TEXT DEFAULT 'general',
    is_active BOOLEAN DEFAULT true,
    sort_order INTEGER DEFAULT 0
);

CREATE TABLE IF NOT EXISTS user_preferences (
    user_id UUID PRIMARY KEY REFERENCES auth.users(id) ON DELETE CASCADE,
    wheelchair_access BOOLEAN DEFAULT false,
    extended_hours BOOLEAN DEFAULT false,
    gluten_free BOOLEAN DEFAULT false,
    low_noise BOOLEAN DEFAULT false,
    public_transport BOOLEAN DEFAULT false,
    pet_friendly BOOLEAN DEFAULT false,
    outdoor_seating BOOLEAN DEFAULT false,
    senior_discounts BOOLEAN DEFAULT false,
    online_booking BOOLEAN DEFAULT false,
    air_conditioned BOOLEAN DEFAULT false,
    preferred_language TEXT DEFAULT 'en'
);

-- =============================================================================
-- RPC functions
-- =============================================================================

CREATE OR REPLACE FUNCTION is_admin(user_id UUID)
RETURNS BOOLEAN
LANGUAGE sql
SECURITY DEFINER
AS $$
    SELECT COALESCE((SELECT p.is_admin FROM profiles p WHERE p.id = is_admin.user_id), false);
$$;

CREATE OR REPLACE FUNCTION set_admin_by_email(user_email TEXT)
RETURNS VOID
LANGUAGE plpgsql
SECURITY DEFINER
AS $$
BEGIN
    UPDATE profiles SET is_admin = true WHERE email = user_email;
    IF NOT FOUND THEN
        RAISE EXCEPTION 'No profile with email %', user_email;
    END IF;
END;
$$;
"""

DROP_TABLES_SQL = """
-- =============================================================================
-- DROP ALL TABLES (USE WITH EXTREME CAUTION!)
-- =============================================================================

DROP TABLE IF EXISTS collection_shares CASCADE;
DROP TABLE IF EXISTS saved_restaurants CASCADE;
DROP TABLE IF EXISTS collections CASCADE;
DROP TABLE IF EXISTS gift_cards CASCADE;
DROP TABLE IF EXISTS business_subscriptions CASCADE;
DROP TABLE IF EXISTS businesses CASCADE;
DROP TABLE IF EXISTS subscription_plans CASCADE;
DROP TABLE IF EXISTS amenity_options CASCADE;
DROP TABLE IF EXISTS user_preferences CASCADE;
DROP TABLE IF EXISTS profiles CASCADE;

DROP FUNCTION IF EXISTS is_admin(UUID) CASCADE;
DROP FUNCTION IF EXISTS set_admin_by_email(TEXT) CASCADE;
"""


# =============================================================================
# Verification Functions
# =============================================================================

def verify_tables() -> dict:
    """Verify that all required tables exist in Supabase.

    Returns:
        Dictionary with verification results.
    """
    from supabase import create_client
    from src.config.settings import get_settings

    settings = get_settings()
    supabase = create_client(
        settings.supabase_url,
        settings.supabase_key.get_secret_value(),
    )

    results = {
        'success': True,
        'tables': {},
        'missing': [],
    }

    for table in REQUIRED_TABLES:
        try:
            supabase.table(table).select('*').limit(1).execute()
            results['tables'][table] = 'OK'
        except Exception as e:
            results['tables'][table] = f"MISSING ({str(e)[:80]})"
            results['missing'].append(table)
            results['success'] = False

    return results


def print_verification_results(results: dict) -> None:
    """Print verification results in a formatted way."""
    print("\n" + "=" * 70)
    print("Supabase Table Verification Results")
    print("=" * 70)
    print(f"\nOverall Status: {'PASS' if results['success'] else 'FAIL'}")
    print("-" * 70)

    for table, status in results['tables'].items():
        icon = "[+]" if status == "OK" else "[-]"
        print(f"  {icon} {table}: {status}")

    if results['missing']:
        print(f"\nMissing Tables: {', '.join(results['missing'])}")
        print("\nRun this script without --verify to get the SQL to create missing tables.")

    print("\n" + "=" * 70)


# =============================================================================
# Main Functions
# =============================================================================

def get_setup_sql() -> str:
    """Get the complete setup SQL with timestamp."""
    return SCHEMA_SQL.format(
        generated_at=datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    )


def get_drop_sql() -> str:
    """Get the SQL to drop all tables (use with caution!)."""
    return DROP_TABLES_SQL


def main():
    """Main entry point for the setup script."""
    parser = argparse.ArgumentParser(
        description='Generate Supabase setup SQL for CityGuide',
    )
    parser.add_argument('--output', '-o', type=str, help='Save SQL to file instead of printing')
    parser.add_argument(
        '--type', '-t',
        choices=['setup', 'drop'],
        default='setup',
        help='Type of SQL to generate (default: setup)',
    )
    parser.add_argument('--verify', '-v', action='store_true', help='Verify that tables exist')
    args = parser.parse_args()

    if args.verify:
        results = verify_tables()
        print_verification_results(results)
        sys.exit(0 if results['success'] else 1)

    sql = get_setup_sql() if args.type == 'setup' else get_drop_sql()
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(sql)
        print(f"SQL saved to: {args.output}")
    else:
        print(sql)


if __name__ == '__main__':
    main()
