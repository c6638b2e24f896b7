"""Comments on videos and comment likes."""
