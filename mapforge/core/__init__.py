# Core engine: errors and map generation
