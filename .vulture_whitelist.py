# Vulture whitelist for azdo-pr-inspector
# This file contains patterns that vulture should ignore to reduce false positives

# CLI command functions - these are used by Click decorators
list_pull_requests
show_pull_request
toggle_viewed
list_viewed
cache_group
cache_sweep
cache_clear

# Pydantic model fields and validators - used by the framework
unique_name
validate_status
validate_reviewers
validate_creation_date
validate_viewed_at
validate_cached_at
model_config

# Classes and methods that may be used externally or by frameworks
MemoryStore
is_loading
returncode
