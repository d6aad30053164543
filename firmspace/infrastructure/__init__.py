"""Infrastructure layer: Firestore, Firebase Authentication and audit sinks."""
