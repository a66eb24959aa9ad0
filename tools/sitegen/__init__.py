"""
Discord Site Generator – Build static-site JSON from Discord content.

Supports:
  • Blog entries from pipe-delimited messages in a text channel
  • Project cards from forum threads (starter message metadata + tags)
  • Per-project update logs from thread replies
  • Downloading update screenshots into the site's image folder
  • Re-runnable output via merge with previously written JSON
"""
