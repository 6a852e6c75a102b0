"""Infrastructure adapters: Wrangler credentials, the Cloudflare API and logging."""
