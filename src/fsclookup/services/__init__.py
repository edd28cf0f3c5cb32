"""Services for fsclookup."""
