from github_finder.coordinators.debounce import Debouncer
from github_finder.coordinators.profile import ProfileCoordinator
from github_finder.coordinators.relationship_list import RelationshipListCoordinator, RelationshipListState

__all__ = ["Debouncer", "ProfileCoordinator", "RelationshipListCoordinator", "RelationshipListState"]
