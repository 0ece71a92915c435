"""Quote and proverb domain: models, rules, storage backends and services."""
