"""Service layer — dispatch and install operations returning ServiceResult."""
