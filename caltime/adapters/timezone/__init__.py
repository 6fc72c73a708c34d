"""Timezone resolver adapters."""
