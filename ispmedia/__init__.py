"""ISPMedia notification service package."""
