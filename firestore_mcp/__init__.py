"""Model Context Protocol server for Google Cloud Firestore."""
