"""
Cook plan module.

Immutable plan model, raw plan validation and the adapters that turn the
recipe generator's timeline payload into a loadable plan.
"""
