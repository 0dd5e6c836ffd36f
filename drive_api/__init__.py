"""Drive API: users, folders, files, trash and share links."""
