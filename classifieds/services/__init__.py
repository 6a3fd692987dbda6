"""Services: document store, change feed and the listing/chat repositories."""
