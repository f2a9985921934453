"""
Flow Editor Engine.

Editing core for visually built chatbot and IVR flows. Flows are directed
graphs of nodes holding actions and an optional router, connected through
named exits. This package provides:

1. Graph Model:
   - Node map with a derived inbound connection index
   - Upsert / remove / connect nodes
   - Add, update, remove and reorder actions
   - Install and remove routers

2. Node Editor Forms:
   - Partial update merge with per-field validation
   - Action forms (messages, email, labels, results, contact updates)
   - Router forms (expression, wait for response, webhook, random)
   - Exit reconciliation by name, preserving connections

3. Localization:
   - Per-language views of translatable objects
   - Missing translation detection
   - Translation editing

4. Definitions:
   - JSON flow definition import and export
"""

__version__ = "1.0.0"
