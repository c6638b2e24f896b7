"""Short videos: uploads, feeds, views and likes."""
