"""ClientGuard: client-side request authorization and input sanitization.

Subpackages:
  - policy      — URL classification, before-send authorization, failure decisions
  - transport   — httpx.AsyncClient wiring for the policy
  - session     — token / session collaborator interfaces and an in-memory store
  - sanitizer   — text, URL and password sanitizers
  - validation  — composable field validators and their messages
  - patterns    — pre-compiled re2 deny-lists and format patterns
"""

__version__ = "0.1.0"
