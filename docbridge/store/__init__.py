"""Document store adapters.

Primary components:
- ``base``: ``CollectionHandle`` protocol, abstract ``DocumentStore`` and
  store exceptions.
- ``mongo``: MongoDB implementation backed by pymongo.
- ``memory``: in-process implementation for local use and tests.
- ``factory``: helpers to construct a store from a mapping or typed config.

Guidance:
- Prefer constructing via ``factory.create_store_from_config`` so
  application code stays decoupled from specific backends.
"""
