"""
Engine configuration: frozen defaults, YAML overrides and validation.
"""
