# backend/tests/test_endpoints.py

from pokego import endpoints


def test_list_carries_limit_and_offset():
    endpoint = endpoints.pokemon_list(limit=20, offset=40)
    assert endpoint.url == "https://pokeapi.co/api/v2/pokemon?limit=20&offset=40"
    assert endpoint.method == "GET"
    assert endpoint.headers == {"Content-Type": "application/json"}

def test_other_endpoints_have_no_query():
    assert endpoints.pokemon_detail(25).url == "https://pokeapi.co/api/v2/pokemon/25"
    assert endpoints.types().url == "https://pokeapi.co/api/v2/type"
    assert endpoints.region_list().url == "https://pokeapi.co/api/v2/region"
    assert endpoints.region_detail(3).url == "https://pokeapi.co/api/v2/region/3"
    assert endpoints.region_detail(3).query_params == ()

def test_custom_base_url():
    endpoint = endpoints.pokemon_detail(1, base_url="http://localhost:8000/api/v2/")
    assert endpoint.url == "http://localhost:8000/api/v2/pokemon/1"
