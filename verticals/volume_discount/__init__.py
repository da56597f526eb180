"""Volume discount vertical: "buy at least N, get P% off".

Wires the core discount layer to one concrete discount function:
- Typed configuration (quantity + percentage) stored in a JSON metafield
- Loader/action routes for the editor page
- Namespace, key and display name configuration
"""
