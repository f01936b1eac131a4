"""In-cluster test application for managed backends."""
