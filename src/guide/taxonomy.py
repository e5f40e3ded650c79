"""
Static location taxonomy.

Region -> country -> city reference data used to populate the cascading
selectors. Iteration order is meaningful: the city resolver returns the
first hit in this order.

City names are unique within a country but not across countries
("Hamilton", "León", "Valencia", "Santiago" and "San José"-style names repeat).
"""

from typing import Optional

REGION_DATA: dict[str, dict[str, list[str]]] = {
    "North America": {
        "United States": sorted([
            "Albuquerque", "Anaheim", "Anchorage", "Arlington", "Atlanta", "Aurora",
            "Austin", "Bakersfield", "Baltimore", "Baton Rouge", "Boise", "Boston",
            "Buffalo", "Chandler", "Charlotte", "Chesapeake", "Chicago", "Chula Vista",
            "Cincinnati", "Cleveland", "Colorado Springs", "Columbus", "Corpus Christi",
            "Dallas", "Denver", "Detroit", "Durham", "El Paso", "Fort Wayne",
            "Fort Worth", "Fremont", "Fresno", "Garland", "Gilbert", "Glendale",
            "Greensboro", "Henderson", "Hialeah", "Honolulu", "Houston", "Irvine",
            "Irving", "Jacksonville", "Jersey City", "Kansas City", "Las Vegas",
            "Laredo", "Lexington", "Lincoln", "Long Beach", "Los Angeles", "Louisville",
            "Lubbock", "Madison", "Memphis", "Mesa", "Miami", "Milwaukee",
            "Minneapolis", "Nashville", "Newark", "New Orleans", "New York", "Norfolk",
            "North Las Vegas", "Oakland", "Oklahoma City", "Omaha", "Orlando",
            "Philadelphia", "Phoenix", "Pittsburgh", "Plano", "Portland", "Raleigh",
            "Reno", "Richmond", "Riverside", "Sacramento", "San Antonio", "San Diego",
            "San Jose", "Santa Ana", "Scottsdale", "Seattle", "St. Louis", "St. Paul",
            "St. Petersburg", "Stockton", "Tampa", "Toledo", "Tucson", "Tulsa",
            "Virginia Beach", "Wichita", "Winston-Salem",
        ]),
        "Canada": ["Toronto", "Vancouver", "Montreal", "Calgary", "Ottawa", "Edmonton", "Mississauga", "Winnipeg", "Quebec City", "Hamilton"],
        "Mexico": ["Mexico City", "Guadalajara", "Monterrey", "Puebla", "Tijuana", "León", "Juárez", "Zapopan", "Mérida", "San Luis Potosí"],
        "Guatemala": ["Guatemala City", "Mixco", "Villa Nueva", "Petapa", "San Juan Sacatepéquez", "Quetzaltenango", "Villa Canales", "Escuintla", "Chinautla", "Chimaltenango"],
        "Costa Rica": ["San José", "Cartago", "Alajuela", "Puntarenas", "Heredia", "Limón", "Desamparados", "San Isidro", "Curridabat", "San Vicente"],
        "Jamaica": ["Kingston", "Spanish Town", "Portmore", "May Pen", "Old Harbour", "Mandeville", "Savanna-la-Mar", "Ocho Rios", "Linstead", "Half Way Tree"],
        "Panama": ["Panama City", "San Miguelito", "Tocumen", "David", "Arraiján", "Colón", "La Chorrera", "Pacora", "Penonome", "Santiago"],
        "Honduras": ["Tegucigalpa", "San Pedro Sula", "Choloma", "La Ceiba", "El Progreso", "Choluteca", "Comayagua", "Puerto Cortés", "La Lima", "Danlí"],
        "El Salvador": ["San Salvador", "Soyapango", "Santa Ana", "San Miguel", "Mejicanos", "Santa Tecla", "Apopa", "Delgado", "Ilopango", "Cojutepeque"],
        "Nicaragua": ["Managua", "León", "Masaya", "Matagalpa", "Chinandega", "Granada", "Estelí", "Tipitapa", "Jinotepe", "Diriamba"],
    },
    "Europe": {
        "United Kingdom": ["London", "Birmingham", "Manchester", "Glasgow", "Liverpool", "Leeds", "Sheffield", "Edinburgh", "Bristol", "Cardiff"],
        "France": ["Paris", "Lyon", "Marseille", "Toulouse", "Nice", "Nantes", "Montpellier", "Strasbourg", "Bordeaux", "Lille"],
        "Germany": ["Berlin", "Hamburg", "Munich", "Cologne", "Frankfurt", "Stuttgart", "Düsseldorf", "Leipzig", "Dortmund", "Essen"],
        "Italy": ["Rome", "Milan", "Naples", "Turin", "Palermo", "Genoa", "Bologna", "Florence", "Bari", "Catania"],
        "Spain": ["Madrid", "Barcelona", "Valencia", "Seville", "Zaragoza", "Málaga", "Murcia", "Palma", "Las Palmas", "Bilbao"],
        "Netherlands": ["Amsterdam", "Rotterdam", "The Hague", "Utrecht", "Eindhoven", "Groningen", "Tilburg", "Almere", "Breda", "Nijmegen"],
        "Poland": ["Warsaw", "Kraków", "Łódź", "Wrocław", "Poznań", "Gdańsk", "Szczecin", "Bydgoszcz", "Lublin", "Białystok"],
        "Portugal": ["Lisbon", "Porto", "Vila Nova de Gaia", "Amadora", "Braga", "Almada", "Funchal", "Coimbra", "Setúbal", "Agualva-Cacém"],
        "Sweden": ["Stockholm", "Gothenburg", "Malmö", "Uppsala", "Västerås", "Örebro", "Linköping", "Helsingborg", "Jönköping", "Norrköping"],
        "Norway": ["Oslo", "Bergen", "Stavanger", "Trondheim", "Drammen", "Fredrikstad", "Kristiansand", "Sandnes", "Tromsø", "Sarpsborg"],
    },
    "Asia": {
        "Japan": ["Tokyo", "Osaka", "Kyoto", "Yokohama", "Kobe", "Nagoya", "Sapporo", "Fukuoka", "Hiroshima", "Sendai"],
        "China": ["Beijing", "Shanghai", "Guangzhou", "Shenzhen", "Chengdu", "Hangzhou", "Xi'an", "Nanjing", "Wuhan", "Tianjin"],
        "India": ["Mumbai", "Delhi", "Bangalore", "Hyderabad", "Chennai", "Kolkata", "Pune", "Ahmedabad", "Jaipur", "Surat"],
        "South Korea": ["Seoul", "Busan", "Incheon", "Daegu", "Daejeon", "Gwangju", "Suwon", "Ulsan", "Changwon", "Goyang"],
        "Thailand": ["Bangkok", "Chiang Mai", "Phuket", "Pattaya", "Hat Yai", "Nakhon Ratchasima", "Udon Thani", "Khon Kaen", "Nakhon Si Thammarat", "Chiang Rai"],
        "Vietnam": ["Ho Chi Minh City", "Hanoi", "Danang", "Can Tho", "Bien Hoa", "Hue", "Nha Trang", "Buon Ma Thuot", "Vung Tau", "Nam Dinh"],
        "Indonesia": ["Jakarta", "Surabaya", "Medan", "Bandung", "Bekasi", "Palembang", "Tangerang", "Makassar", "South Tangerang", "Batam"],
        "Malaysia": ["Kuala Lumpur", "George Town", "Ipoh", "Shah Alam", "Petaling Jaya", "Johor Bahru", "Seremban", "Kuala Terengganu", "Kota Kinabalu", "Klang"],
        "Singapore": ["Singapore", "Jurong East", "Woodlands", "Tampines", "Sengkang", "Hougang", "Yishun", "Bedok", "Punggol", "Ang Mo Kio"],
        "Philippines": ["Manila", "Quezon City", "Caloocan", "Davao", "Cebu City", "Zamboanga", "Antipolo", "Pasig", "Taguig", "Valenzuela"],
    },
    "South America": {
        "Brazil": ["São Paulo", "Rio de Janeiro", "Brasília", "Salvador", "Fortaleza", "Belo Horizonte", "Manaus", "Curitiba", "Recife", "Porto Alegre"],
        "Argentina": ["Buenos Aires", "Córdoba", "Rosario", "Mendoza", "Tucumán", "La Plata", "Mar del Plata", "Salta", "Santa Fe", "San Juan"],
        "Colombia": ["Bogotá", "Medellín", "Cali", "Barranquilla", "Cartagena", "Cúcuta", "Bucaramanga", "Pereira", "Santa Marta", "Ibagué"],
        "Chile": ["Santiago", "Valparaíso", "Concepción", "La Serena", "Antofagasta", "Temuco", "Rancagua", "Talca", "Arica", "Chillán"],
        "Peru": ["Lima", "Arequipa", "Trujillo", "Chiclayo", "Piura", "Iquitos", "Cusco", "Chimbote", "Huancayo", "Tacna"],
        "Venezuela": ["Caracas", "Maracaibo", "Valencia", "Barquisimeto", "Maracay", "Ciudad Guayana", "San Cristóbal", "Maturín", "Ciudad Bolívar", "Cumana"],
        "Ecuador": ["Guayaquil", "Quito", "Cuenca", "Santo Domingo", "Machala", "Durán", "Manta", "Portoviejo", "Ambato", "Riobamba"],
        "Bolivia": ["Santa Cruz", "El Alto", "La Paz", "Cochabamba", "Sucre", "Tarija", "Potosí", "Sacaba", "Quillacollo", "Oruro"],
        "Paraguay": ["Asunción", "Ciudad del Este", "San Lorenzo", "Luque", "Capiatá", "Lambaré", "Fernando de la Mora", "Limpio", "Ñemby", "Encarnación"],
        "Uruguay": ["Montevideo", "Salto", "Ciudad de la Costa", "Paysandú", "Las Piedras", "Rivera", "Maldonado", "Tacuarembó", "Melo", "Mercedes"],
    },
    "Africa & Middle East": {
        "South Africa": ["Cape Town", "Johannesburg", "Durban", "Pretoria", "Port Elizabeth", "Pietermaritzburg", "Benoni", "Tembisa", "East London", "Vereeniging"],
        "Egypt": ["Cairo", "Alexandria", "Giza", "Shubra El Kheima", "Port Said", "Suez", "Luxor", "Mansoura", "El Mahalla El Kubra", "Tanta"],
        "Nigeria": ["Lagos", "Kano", "Ibadan", "Kaduna", "Port Harcourt", "Benin City", "Maiduguri", "Zaria", "Aba", "Jos"],
        "Kenya": ["Nairobi", "Mombasa", "Nakuru", "Eldoret", "Kisumu", "Thika", "Malindi", "Kitale", "Garissa", "Kakamega"],
        "UAE": ["Dubai", "Abu Dhabi", "Sharjah", "Al Ain", "Ajman", "Ras Al Khaimah", "Fujairah", "Umm Al Quwain", "Khor Fakkan", "Dibba Al-Fujairah"],
        "Saudi Arabia": ["Riyadh", "Jeddah", "Mecca", "Medina", "Dammam", "Khobar", "Tabuk", "Buraidah", "Khamis Mushait", "Hofuf"],
        "Morocco": ["Casablanca", "Rabat", "Fez", "Marrakech", "Agadir", "Tangier", "Meknes", "Oujda", "Kenitra", "Tetouan"],
        "Turkey": ["Istanbul", "Ankara", "Izmir", "Bursa", "Adana", "Gaziantep", "Konya", "Antalya", "Kayseri", "Mersin"],
        "Israel": ["Jerusalem", "Tel Aviv", "Haifa", "Rishon LeZion", "Petah Tikva", "Ashdod", "Netanya", "Beer Sheva", "Holon", "Bnei Brak"],
        "Jordan": ["Amman", "Zarqa", "Irbid", "Russeifa", "Wadi as-Sir", "Aqaba", "Madaba", "Sahab", "Mafraq", "Jerash"],
        "Lebanon": ["Beirut", "Tripoli", "Sidon", "Tyre", "Nabatieh", "Zahle", "Baalbek", "Jounieh", "Byblos", "Aley"],
        "Qatar": ["Doha", "Al Rayyan", "Umm Salal", "Al Khor", "Al Wakrah", "Dukhan", "Mesaieed", "Lusail", "Al Shamal", "Al Daayen"],
    },
    "Oceania": {
        "Australia": ["Sydney", "Melbourne", "Brisbane", "Perth", "Adelaide", "Gold Coast", "Newcastle", "Canberra", "Sunshine Coast", "Wollongong", "Woolgoolga", "Coffs Harbour"],
        "New Zealand": ["Auckland", "Wellington", "Christchurch", "Hamilton", "Tauranga", "Napier-Hastings", "Dunedin", "Palmerston North", "Nelson", "Rotorua"],
    },
}


def get_regions() -> list[str]:
    """Region names in display order."""
    return list(REGION_DATA)


def get_countries(region: Optional[str]) -> list[str]:
    """Country names for a region. Unknown or empty region -> []."""
    if not region:
        return []
    return list(REGION_DATA.get(region, {}))


def get_cities(region: Optional[str], country: Optional[str]) -> list[str]:
    """City names for a country within a region. Unknown -> []."""
    if not region or not country:
        return []
    return list(REGION_DATA.get(region, {}).get(country, []))


def iter_locations():
    """Yield (region, country, city) for every city in taxonomy order."""
    for region, countries in REGION_DATA.items():
        for country, cities in countries.items():
            for city in cities:
                yield region, country, city


def get_all_cities() -> list[str]:
    """Every city name across all regions, duplicates retained, in taxonomy order."""
    return [city for _, _, city in iter_locations()]


def find_location_for_city(city: str) -> Optional[tuple[str, str]]:
    """First (region, country) listing the city, or None."""
    for region, country, name in iter_locations():
        if name == city:
            return region, country
    return None


def get_location_stats() -> dict[str, int]:
    """Counts of regions, countries and cities in the taxonomy."""
    return {
        "regions": len(REGION_DATA),
        "countries": sum(len(countries) for countries in REGION_DATA.values()),
        "cities": sum(1 for _ in iter_locations()),
    }
