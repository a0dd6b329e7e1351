"""Settings package for the SportBook project.

`base.py` contains the configuration shared by every environment;
`dev.py`, `prod.py` and `test.py` extend it with environment specific
overrides.
"""
