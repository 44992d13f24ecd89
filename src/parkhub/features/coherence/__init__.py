"""Cache coherence: snapshot keys, invalidation plans and the coordinator."""
