"""Request and response models. The shared envelope lives in schemas.base."""
