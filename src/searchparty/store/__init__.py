"""Location persistence.

The store is the only state shared between the sampler, the presence
merger and the heatmap aggregator; all three talk to it independently.
"""

from searchparty.store.base import LocationStore
from searchparty.store.firestore import FirestoreLocationStore
from searchparty.store.memory import InMemoryLocationStore

__all__ = ["FirestoreLocationStore", "InMemoryLocationStore", "LocationStore"]
