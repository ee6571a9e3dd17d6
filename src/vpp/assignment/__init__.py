"""App Store License Assignment Module.

This module lets an administrator add a VPP-purchased App Store app to a team:
- Check that a VPP token is configured
- List the purchased apps not yet added to the team
- Track the selected app
- Add it, notify, and hand off to the team's software list

Architecture: Clean Architecture with Hexagonal (Ports & Adapters)
"""
