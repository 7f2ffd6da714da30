"""Library core: remote client, store, commands and views."""
