import re
from typing import List

from ecologika.models.interest import Interest, InterestGroups, InterestOption

INTEREST_LABELS = {
    'metal': 'Metal',
    'rubber': 'Borracha',
    'textile': 'Têxteis',
    'plastic': 'Plástico',
    'used-oil': 'Óleo (OAU)',
    'forestry-and-land-use': 'Florestal e Uso do Solo',
    'renewable-energy': 'Energia Renovável',
    'energy-efficiency-and-fuel-substitution': 'Eficiência Energética e Substituição de Combustíveis',
    'waste-and-biomass': 'Resíduos e Biomassa',
    'industry-and-processes': 'Indústria e Processos',
}

WASTE_KEYS = ['metal', 'rubber', 'textile', 'plastic', 'used-oil']
PROJECT_KEYS = [
    'forestry-and-land-use',
    'renewable-energy',
    'energy-efficiency-and-fuel-substitution',
    'waste-and-biomass',
    'industry-and-processes',
]

# Brazilian CNPJ (00.000.000/0000-00) or Portuguese 9-digit NIF
NIF_CNPJ_REGEX = re.compile(r"^(\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}|\d{9})$")


def validate_nif_cnpj(value: str) -> bool:
    return bool(NIF_CNPJ_REGEX.match(value))


def interest_label(key: str) -> str:
    return INTEREST_LABELS.get(key, key)


def categorize_interests(interests: List[Interest]) -> InterestGroups:
    options = [InterestOption(id=i.id, key=i.key, label=interest_label(i.key)) for i in interests]
    projects = [o for o in options if o.key in PROJECT_KEYS]
    return InterestGroups(
        residuos=[o for o in options if o.key in WASTE_KEYS],
        projetos_certificados=projects,
        projetos_apoiados=list(projects),  # Same options as certified projects
    )


async def list_interests(db) -> List[Interest]:
    docs = await db.interesse.find({}).sort("key", 1).to_list(1000)
    return [Interest(**doc) for doc in docs]
