from django.db import models


class GraphQLAccess(models.Model):
    """Carries the permissions checked by the access gate and the producers.

    No table is created for it.
    """

    class Meta:
        managed = False
        default_permissions = ()
        permissions = [
            ("execute_graphql_requests", "Execute arbitrary GraphQL requests"),
            ("access_environment_indicator", "See the environment indicator"),
        ]
