# Shared configuration, constants and helpers
