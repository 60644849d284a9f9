from github_finder.models.user import RelationshipType, SearchResultSet, UserProfile, UserSummary

__all__ = ["RelationshipType", "SearchResultSet", "UserProfile", "UserSummary"]
