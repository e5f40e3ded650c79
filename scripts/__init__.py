"""
Utility Scripts.

This package contains operational scripts:

- setup_supabase.py: Print the SQL schema and RPC functions, or verify tables

Run scripts with: python scripts/setup_supabase.py --help
"""
