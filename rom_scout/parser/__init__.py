"""rom_scout.parser: правила извлечения данных из разметки каталога."""
