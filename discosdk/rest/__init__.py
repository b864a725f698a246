"""REST API client, middleware, request batching and per-resource services."""