"""
ecoestate_data.transforms — pure functions over remote payloads.

  jsonstat — StatFin JSON-stat cross-tabulation → PostalCodeData rows
  osm      — Overpass elements → GeoJSON FeatureCollection
  trends   — yearly PostalCodeData snapshots → PriceTrend records
"""
