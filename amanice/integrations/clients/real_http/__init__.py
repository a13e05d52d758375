"""
Real HTTP integration clients.

These clients talk to real collaborators over HTTP:
- the static catalog document (products.json)
- the Remote Store endpoints (getProducts / saveProduct / updateProduct / deleteProduct)

Important:
- Must implement the same interfaces as the mock clients
- Must return data shaped according to amanice/integrations/contracts/*
"""
