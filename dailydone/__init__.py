"""DailyDone task marketplace API."""
