"""Hackathon administration backend.

Feature modules (candidates, attendance, squads, hackathons, reports, admins,
images) each expose a thin Flask controller on top of a service and a MySQL
repository.
"""
