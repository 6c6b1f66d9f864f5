"""Extract selected pages into one document or an archive of documents."""
