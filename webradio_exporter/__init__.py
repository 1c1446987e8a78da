"""Command-line entry points for the radio export API."""
