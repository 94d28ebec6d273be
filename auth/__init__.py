"""auth/ -- Credentials, bearer tokens, the user directory and the request gate.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/, orders/, or catalog/.
api/ imports from auth/, not the other way around.
"""
