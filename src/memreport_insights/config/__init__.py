"""Engine configuration: versions, ini dialects, pattern manifests and resolution.

Submodules:
  schema         -- pydantic models for section/table definitions and resolved configs
  loaders        -- async file-system and HTTP resource loaders
  engine_reader  -- BaseEngine.ini dialect parsing and validation
  manifest       -- per-family index of available table-pattern resources
  resolver       -- version -> ResolvedEngineConfig, with the pattern cache
"""
