"""
Modules - business logic.

- debounce/   - PID marker supersession and cancellation
- playback/   - clip selection and playback orchestration
- invocation  - one full hook invocation, start to finish
"""
