"""Multi-Collection Reconciler (MCR).

Keeps a dynamic, heterogeneous collection of sub-form rows in sync with
bound and submitted data:
 - initialize rows from bound data (one row per entry, tagged with its config)
 - reconcile the submitted row set against the add/delete policy
 - finalize the committed data after the host's data mapper has run

The host form framework is a collaborator; a small in-memory reference host
ships alongside so the protocol can be driven end to end.
"""
