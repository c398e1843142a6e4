"""Services module.

Services:
- reminders.py: In-memory reminder store and its pure snapshot operations
- intake.py: Natural-language intake adapter with fallback policy
- gemini.py: Inference backend interface and Gemini implementation
- recording.py: Scoped audio capture sessions for voice intake
- preferences.py: Persisted theme/background/session preferences
- auth.py: Mock authentication
- sounds.py: Sound signal queue
- clock.py / errors.py: Time helpers and the user-facing error taxonomy
"""
