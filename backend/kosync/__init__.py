"""kosync: self-hosted KOReader progress sync server."""
