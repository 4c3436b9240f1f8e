"""Service layer — ServiceResult wrappers over the attribute store."""
