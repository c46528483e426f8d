"""
Generators — render the finished configuration into host artifacts.

Each generator module exposes ``generate(config)`` returning a list of
``GeneratedFile`` instances. Output is a pure function of the config:
no timestamps, no randomness, so the same configuration always yields
byte-identical files.
"""
