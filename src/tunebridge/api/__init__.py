# HTTP surface: /auth onboarding pages and the /spotify JSON API.
# Created: 2026-10-18
