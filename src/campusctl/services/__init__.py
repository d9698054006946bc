"""Service layer — graph operations over immutable CampusGraph versions."""
