"""GraphQL catalog: query texts, variable builders and the response decoder."""
