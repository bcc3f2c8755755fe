"""Photo storage with quota enforcement backed by S3 and Supabase."""
